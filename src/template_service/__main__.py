"""Allow running the service with ``python -m template_service``."""

from template_service.main import main

if __name__ == "__main__":
    main()
