#!/usr/bin/env python
"""
Gesture Voxel Builder - Main Entry Point
========================================
Run the gesture-driven voxel building application.
"""

import sys
import os
from pathlib import Path

# Load environment variables from .env file
from dotenv import load_dotenv
load_dotenv(Path(__file__).parent / ".env")

# Add src directory to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), 'src'))

from ui import main

if __name__ == "__main__":
    main()
