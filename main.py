#!/usr/bin/env python3
"""
Crumbler text pre-processing pipeline.

Usage:
    python main.py -i input.txt --all
    python main.py -i https://example.com/article.html --clean --tokenize --pos
    python main.py --project output/input --ner --language EN
"""

import sys
from pathlib import Path

# Allow running from a source checkout without installing
sys.path.insert(0, str(Path(__file__).parent))

from crumbler.cli import main

if __name__ == "__main__":
    sys.exit(main())
