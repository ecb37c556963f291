from chat_core.cli import main

raise SystemExit(main())
