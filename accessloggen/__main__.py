import sys
from accessloggen.producer.simulator import main

sys.exit(main())
