# "tests" is a package so conftest/tests can import tests.helpers by absolute name,
# also when pytest is started from another directory.
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))
