#!/usr/bin/env python3
"""
MiniBTree - Entry point script

Run the REPL:
    python -m minibtree -t 3

Or run commands and exit:
    python -m minibtree -e "insert 10 20 5; traverse"
"""

from minibtree.core.repl import main

if __name__ == '__main__':
    main()
