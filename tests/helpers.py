from pathlib import Path
from typing import Dict, Optional

from safaridriver.core.safari.platform import Environment, Platform


def make_environment(home: Path, platform: Platform = Platform.MAC, variables: Optional[Dict[str, str]] = None) -> Environment:
    return Environment(platform=platform, user_name="tester", home_dir=home, variables=variables or {})


def snapshot(root: Path) -> Dict[str, bytes]:
    """Relative path -> contents (b'' for directories) of everything under root."""
    return {
        str(p.relative_to(root)): (p.read_bytes() if p.is_file() else b"")
        for p in sorted(root.rglob("*"))
    }
