# Services package init
"""
Roster Backend — Services Layer
================================

Service Inventory:
    - UserService:     registration, login, admin seeding, password reset
    - EmployeeService: roster CRUD and search
    - ReportService:   statistics and stored text reports
    - report_templates: pure text rendering used by ReportService
"""
