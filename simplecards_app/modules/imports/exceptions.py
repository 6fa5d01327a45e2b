class ModuleImportError(Exception):
    """Base exception for module import jobs."""
    pass


class QuizletModuleFetchingError(ModuleImportError):
    """Raised when Quizlet kept blocking the request for every attempt."""

    def __init__(self, module_id: str):
        self.module_id = module_id
        super().__init__(f'module "{module_id}" fetching failed')


class QuizletModuleParsingError(ModuleImportError):
    """Raised when Quizlet returned no document (unknown or private module)."""

    def __init__(self, module_id: str):
        self.module_id = module_id
        super().__init__(f'module "{module_id}" parsing failed')


class ImportInterruptedError(ModuleImportError):
    """Raised when the worker pool is shutting down mid-import."""
    pass
