from src.automator.cli import main

raise SystemExit(main())
