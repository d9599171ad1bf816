class BaseUrlMissingError(Exception):
    def __init__(
        self,
        message="Base URL is not configured. Set \033[1mDECLAREST_BASE_URL\033[22m.",
    ):
        self.message = message
        super().__init__(self.message)
