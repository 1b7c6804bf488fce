from context_store.main import main

raise SystemExit(main())
