"""
Use Cases

Organized into domain folders:
- auth/: Registration, login flows, verification, password reset
- two_factor/: TOTP enable/confirm/disable
- users/: Current user profile and account lifecycle

Import from subdirectories.
"""
