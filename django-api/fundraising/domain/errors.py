"""Domain errors for campaigns, donations and donors."""

from core.domain.errors import ConflictError, ErrorCode, NotFoundError, ValidationError


class CampaignNotFoundError(NotFoundError):
    def __init__(self, campaign_id: str) -> None:
        super().__init__(code=ErrorCode.CAMPAIGN_NOT_FOUND, message="Campaign not found")
        self.campaign_id = campaign_id


class ParticipantNotFoundError(NotFoundError):
    """Raised when a participant is missing or belongs to another campaign."""

    def __init__(self, participant_id: str) -> None:
        super().__init__(
            code=ErrorCode.PARTICIPANT_NOT_FOUND,
            message="Participant not found for campaign",
            field="participant_id",
        )
        self.participant_id = participant_id


class DonationNotFoundError(NotFoundError):
    def __init__(self, donation_id: str) -> None:
        super().__init__(code=ErrorCode.DONATION_NOT_FOUND, message="Donation not found")
        self.donation_id = donation_id


class DonorNotFoundError(NotFoundError):
    """Raised when a donor is missing or belongs to another ensemble."""

    def __init__(self, donor_id: str) -> None:
        super().__init__(code=ErrorCode.DONOR_NOT_FOUND, message="Donor not found")
        self.donor_id = donor_id


class InvalidWindowError(ValidationError):
    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.INVALID_WINDOW,
            message="Campaign cannot end before it starts",
            field="ends_at",
        )


class DonorEmailRequiredError(ValidationError):
    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.VALIDATION_ERROR,
            message="Donor email is required",
            field="email",
        )


class DonorNameRequiredError(ValidationError):
    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.VALIDATION_ERROR,
            message="Donor needs a first name, last name or organization name",
            field="first_name",
        )


class InvalidChoiceError(ValidationError):
    def __init__(self, field: str, message: str) -> None:
        super().__init__(code=ErrorCode.VALIDATION_ERROR, message=message, field=field)


class DuplicateDonorEmailError(ConflictError):
    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.DUPLICATE_DONOR_EMAIL,
            message="Another donor in this ensemble already uses that email",
            field="email",
        )
