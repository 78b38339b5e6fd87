"""User domain module.

This domain describes the application user: identity, contact data and the
avatar image (reference, content hash and inline base64 payload).
Persistence lives in the infrastructure layer behind IUserRepository.
"""
