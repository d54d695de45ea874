"""
Fixtura - Fixture construction engine.

Builds runnable test fixtures from classes: resolves generic type arguments,
checks for a matching constructor, and collects test methods.

Usage:
    fixtura build <module:Class>              # Build and show a fixture
    fixtura build <module:Class> -a 42 -t int # With arguments and type arguments
    fixtura sample-config                     # Print a sample configuration
"""

__version__ = "0.1.0"
