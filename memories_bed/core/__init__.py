"""Core services: persistence client, domain managers, settings and downloads."""
