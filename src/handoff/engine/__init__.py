"""Decision core: fingerprinting, tracking, rule evaluation, routing."""
