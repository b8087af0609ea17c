"""
World API Backend — Services Layer
==================================

What:  Decision logic between the routes (HTTP) and the database.
How:   Every service is constructed per request around a WorldStore (and,
       for login, a SessionGate) by the providers in dependencies.py.

Service Inventory:
    - WorldStore:    one SQL statement per method over country/city/users
    - password:      bcrypt hashing and verification
    - SessionGate:   signed-cookie server-side sessions
    - AuthService:   signup and login
    - WorldService:  city lookups, city creation and world browsing
"""
