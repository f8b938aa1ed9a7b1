"""Core domain logic: RBAC, approval workflow, override sessions."""
