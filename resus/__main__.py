"""
Entry point for running resus-clock as a module.

Usage:
    python -m resus doses --weight 20
    python -m resus simulate --scenario vf_witnessed
    python -m resus --help
"""
from resus.delivery.cli import main

if __name__ == "__main__":
    main()
