configs = [
    {
        "id": "solo/solo-remote-config",
        "value": b"version: 3\n",
    },
    {
        "id": "solo/leases/solo",
        "value": '{"holderIdentity": "alice"}',
    },
    {
        "id": "other/solo-remote-config",
        "value": b"version: 2\n",
    },
]
