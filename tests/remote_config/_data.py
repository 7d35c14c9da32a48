from rconf.core import Time

NOW = 1_700_000_000.0

MIGRATED_AT = Time.to_datetime(NOW).isoformat()

clusters = {
    "c1": {
        "name": "c1",
        "namespace": "solo",
        "deployment": "solo-deployment",
        "dnsBaseDomain": "cluster.local",
        "dnsConsensusNodePattern": "network-{nodeAlias}-svc.{namespace}.svc",
    },
}

versions = {
    "cli": "0.30.0",
    "chart": "0.42.0",
    "consensusNode": "v0.58.0",
    "mirrorNodeChart": "0.120.0",
    "explorerChart": "24.12.0",
    "jsonRpcRelayChart": "0.63.0",
}

document_v0 = {
    "metadata": {
        "name": "solo",
        "namespace": "solo",
        "deploymentName": "solo-deployment",
        "lastUpdatedAt": "2024-12-01T10:00:00.000Z",
        "lastUpdateBy": "alice@example.com",
        "soloVersion": "0.30.0",
        "soloChartVersion": "0.42.0",
        "hederaPlatformVersion": "v0.58.0",
        "migration": {
            "migratedAt": "2024-12-01T10:00:00.000Z",
            "migratedBy": "alice@example.com",
            "fromVersion": "0.29.0",
        },
    },
    "clusters": clusters,
    "components": {
        "consensusNodes": {
            "node1": {
                "name": "node1",
                "cluster": "c1",
                "namespace": "solo",
                "state": "started",
                "nodeId": 0,
            },
        },
        "relays": {
            "relay": {
                "name": "relay",
                "cluster": "c1",
                "namespace": "solo",
                "consensusNodeAliases": ["node1"],
            },
        },
        "mirrorNodeExplorers": {
            "explorer": {
                "name": "explorer",
                "cluster": "c1",
                "namespace": "solo",
            },
        },
    },
    "commandHistory": ["deployment create"],
    "lastExecutedCommand": "deployment create",
    "flags": {},
}

document_v1 = {
    "version": 1,
    "metadata": {
        "migrations": [],
        "versions": versions,
    },
    "clusters": clusters,
    "components": {
        "consensusNodes": {
            "node1": {
                "name": "node1",
                "cluster": "c1",
                "namespace": "solo",
                "state": "started",
                "nodeId": 0,
            },
            "node2": {
                "name": "node2",
                "cluster": "c1",
                "namespace": "solo",
                "state": "initialized",
                "nodeId": 1,
            },
        },
        "relayNodes": {
            "relay": {
                "name": "relay",
                "cluster": "c1",
                "namespace": "solo",
                "state": "active",
                "consensusNodeAliases": ["node1", "node2"],
            },
        },
        "haProxies": {
            "haproxy-node1": {
                "name": "haproxy-node1",
                "cluster": "c1",
                "namespace": "solo",
                "state": "active",
            },
            "haproxy-node2": {
                "name": "haproxy-node2",
                "cluster": "c1",
                "namespace": "solo",
                "state": "deleted",
            },
        },
    },
    "commandHistory": ["Executed by alice: deployment create"],
    "lastExecutedCommand": "Executed by alice: deployment create",
    "flags": {"release_tag": "v0.58.0"},
}

document_v3 = {
    "version": 3,
    "metadata": {
        "migrations": [
            {
                "version": 2,
                "migratedAt": MIGRATED_AT,
                "migratedBy": "system",
                "fromVersion": 1,
            },
            {
                "version": 3,
                "migratedAt": MIGRATED_AT,
                "migratedBy": "system",
                "fromVersion": 2,
            },
        ],
        "versions": versions,
    },
    "clusters": clusters,
    "components": {
        "consensusNodes": {
            0: {
                "id": 0,
                "name": "node1",
                "cluster": "c1",
                "namespace": "solo",
                "phase": "started",
                "nodeId": 0,
                "nodeState": "started",
            },
            1: {
                "id": 1,
                "name": "node2",
                "cluster": "c1",
                "namespace": "solo",
                "phase": "configured",
                "nodeId": 1,
                "nodeState": "initialized",
            },
        },
        "relayNodes": {
            0: {
                "id": 0,
                "name": "relay",
                "cluster": "c1",
                "namespace": "solo",
                "phase": "started",
                "consensusNodeIds": [0, 1],
            },
        },
        "haProxies": {
            0: {
                "id": 0,
                "name": "haproxy-node1",
                "cluster": "c1",
                "namespace": "solo",
                "phase": "started",
            },
            1: {
                "id": 1,
                "name": "haproxy-node2",
                "cluster": "c1",
                "namespace": "solo",
                "phase": "deleted",
            },
        },
    },
    "commandHistory": ["Executed by alice: deployment create"],
    "lastExecutedCommand": "Executed by alice: deployment create",
    "flags": {"release_tag": "v0.58.0"},
}
