"""Error taxonomy shared by the pipeline stages and the assembly service.

Every error carries a stable ``kind`` string and an HTTP-style ``status_code``
so a transport layer can map it to a response without inspecting messages.
"""


class ArticleError(Exception):
    kind = "ArticleError"
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"kind": self.kind, "message": self.message}


class InputError(ArticleError):
    """Missing or malformed caller input."""

    kind = "InputError"
    status_code = 400


class InvalidTemplateDefinition(InputError):
    kind = "InvalidDefinition"


class MissingTemplateId(InputError):
    kind = "MissingId"


class MissingIdOrName(InputError):
    kind = "MissingIdOrName"


class UnreadableDocument(ArticleError):
    """The paragraph extractor could not make sense of the uploaded bytes."""

    kind = "UnreadableDocument"
    status_code = 422


class TemplateNotFound(ArticleError, LookupError):
    kind = "TemplateNotFound"
    status_code = 404

    def __init__(self, template_id: str):
        super().__init__(f"Template '{template_id}' does not exist")
        self.template_id = template_id


class RegistryInvariantViolation(ArticleError):
    """A registry mutation was refused; the registry is left unchanged."""

    kind = "RegistryInvariantViolation"
    status_code = 409


class DuplicateTemplateId(RegistryInvariantViolation):
    kind = "DuplicateId"

    def __init__(self, template_id: str):
        super().__init__(f"Template id '{template_id}' already exists")
        self.template_id = template_id


class LastTemplateRemaining(RegistryInvariantViolation):
    kind = "LastTemplateRemaining"

    def __init__(self):
        super().__init__("Cannot remove the last template; at least one must remain")


class BuiltInTemplateProtected(ArticleError):
    kind = "BuiltInTemplateProtected"
    status_code = 403

    def __init__(self, template_id: str):
        super().__init__(f"Built-in template '{template_id}' cannot be deleted")
        self.template_id = template_id
