"""
Use Cases

Organized into domain folders:
- auth/: Account flows (register, login, password management)
- users/: Administrator user management
"""
