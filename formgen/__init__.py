"""
Form code builder: assemble form fields and generate a zod schema plus a
react-hook-form component from them.
"""

__version__ = "1.0.0"
