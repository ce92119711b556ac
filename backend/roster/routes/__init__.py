# Routes package init
"""
Roster Backend — API Routes Package
====================================

Route Inventory:
    - auth.py:       /api/auth/*       accounts, login, password tools
    - employees.py:  /api/employees/*  roster CRUD and search
    - reports.py:    /api/reports/*    statistics and text reports
    - health.py:     /health           service health check

Routes stay thin: extract input, call a service, shape the response.
"""
