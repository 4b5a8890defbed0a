"""Application layer - services, interfaces, and DTOs.

Import services from `core.application.services` directly; this package
stays import-light so the data layer can depend on the DTOs.
"""
