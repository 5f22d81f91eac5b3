# conftest.py at project root

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent

# `core`, `infra` and `app` are plain directories; make them importable
# when tests run without `pip install -e .`
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))
