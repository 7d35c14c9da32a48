DEFAULT_LEASE_DURATION = 20.0
