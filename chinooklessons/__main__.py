from chinooklessons.cli import main

raise SystemExit(main())
