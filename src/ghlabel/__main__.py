"""Allow running ghlabel as `python -m ghlabel`."""

from ghlabel.main import main

raise SystemExit(main())
