"""Entry point: python -m examplegen

Loads the OpenAPI spec, writes example responses to examples/.
"""

from __future__ import annotations

from .cli import main

if __name__ == "__main__":
    main()
