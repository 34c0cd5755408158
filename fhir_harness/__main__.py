import sys

from fhir_harness.cli import main

sys.exit(main())
