import os
import sys

# Add src directory to path to allow importing the package without installing it
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src")))
