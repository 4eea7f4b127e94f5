"""
Repository layer - record persistence workflows.

Repositories orchestrate the remote data gateway and keep an observable
store in step with the backend.
"""
