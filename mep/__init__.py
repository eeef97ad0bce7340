"""
MEP - Building services calculation engine

Simplified mechanical, electrical, plumbing and fire protection design
calculations (ASHRAE, NEC, UPC/IPC, NFPA methods). Educational
approximations, not certified design software.

Modules:
    core        - Shared services (config, logging, output)
    engineering - HVAC, electrical, plumbing and fire protection engines
    cli         - Typer command line interface
"""

__version__ = "0.1.0"
