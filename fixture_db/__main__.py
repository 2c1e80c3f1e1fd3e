from fixture_db.runner import main

raise SystemExit(main())
