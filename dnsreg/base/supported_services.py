from typing import Literal


existing_operations = Literal["ping", "services", "register", "deregister", "refresh"]
