"""Time & attendance accounting engine.

Organized by feature modules (attendance, payroll, labor) with a thin Flask
controller layer over service/repository layers.
"""
