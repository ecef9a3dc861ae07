from appworker.cli.cli import main

raise SystemExit(main())
