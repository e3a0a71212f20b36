from chuff.cli import main

raise SystemExit(main())
