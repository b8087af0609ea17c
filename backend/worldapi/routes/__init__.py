"""
World API Backend — API Routes Package
======================================

Route Inventory:
    - cities.py:  GET  /cities/{cityName}
                  POST /cities
    - auth.py:    POST /signup
                  POST /login
                  GET  /me                       (session required)
    - world.py:   GET  /world/{countryName}/{cityName}
    - health.py:  GET  /health

Routes stay thin: bind input, call a service, pick the status code.
"""
