#!/usr/bin/env python3
"""Direct launcher for the FinSync dashboard.

This script launches Streamlit with the finsync directory as the app root,
enabling automatic page discovery from the pages/ subdirectory.
"""

import sys
import subprocess
import os
from pathlib import Path

project_root = Path(__file__).parent.resolve()
app_dir = project_root / "finsync"

if __name__ == "__main__":
    # Streamlit discovers pages/ relative to the working directory
    os.chdir(app_dir)
    sys.path.insert(0, str(project_root))
    sys.exit(subprocess.run([
        sys.executable, "-m", "streamlit", "run",
        "Home.py", *sys.argv[1:],
    ]).returncode)
