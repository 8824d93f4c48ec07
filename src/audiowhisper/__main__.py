from audiowhisper.app import main

raise SystemExit(main())
