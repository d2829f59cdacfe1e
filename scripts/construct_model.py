"""Model construction script for item recommendation model data"""

import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from itemrec.cli import main


if __name__ == "__main__":
    sys.exit(main())
