from vehicle_dashboard.cli import main

raise SystemExit(main())
