"""
Serializers for the license ledger API.

Response serializers read application DTOs; field names are the
camelCase keys the dashboard consumes.
"""

from rest_framework import serializers


class AddLicenseRequestSerializer(serializers.Serializer):
    """Serializer for the single add request; the email is checked by the handler."""

    email = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class AddLicensesRequestSerializer(serializers.Serializer):
    """Serializer for the batch add request."""

    emails = serializers.ListField(
        child=serializers.CharField(allow_blank=True, allow_null=True),
        required=False,
        allow_null=True,
    )


class ImportLicensesRequestSerializer(serializers.Serializer):
    """Serializer for the CSV import request."""

    file = serializers.FileField()


class LicenseIdRequestSerializer(serializers.Serializer):
    """Serializer for requests naming one license in the body or query string."""

    licenseId = serializers.CharField(
        source="license_id", required=False, allow_blank=True, allow_null=True
    )


class UpdateLicenseEmailRequestSerializer(serializers.Serializer):
    """Serializer for the update email request."""

    licenseId = serializers.CharField(
        source="license_id", required=False, allow_blank=True, allow_null=True
    )
    newEmail = serializers.CharField(
        source="new_email", required=False, allow_blank=True, allow_null=True
    )


class ActivateLicenseRequestSerializer(serializers.Serializer):
    """Serializer for the public activation request."""

    licenseId = serializers.CharField(
        source="license_id", required=False, allow_blank=True, allow_null=True
    )
    businessName = serializers.CharField(
        source="business_name", max_length=255, required=False, allow_blank=True, allow_null=True
    )
    businessType = serializers.CharField(
        source="business_type", max_length=255, required=False, allow_blank=True, allow_null=True
    )


class VerifyLicenseRequestSerializer(serializers.Serializer):
    """Serializer for the verification query string."""

    licenseId = serializers.UUIDField(source="license_id")


class PurchaseCallbackRequestSerializer(serializers.Serializer):
    """Serializer documenting the payment callback query string."""

    licenseCount = serializers.CharField(source="license_count", required=False)
    payment = serializers.CharField(required=False)
    paymentType = serializers.CharField(source="payment_type", required=False)
    reference = serializers.CharField(required=False)
    signature = serializers.CharField(required=False)


class TopUpLicensesRequestSerializer(serializers.Serializer):
    """Serializer for the service top-up request."""

    adminId = serializers.UUIDField(source="admin_id", required=False, allow_null=True)
    teamId = serializers.UUIDField(source="team_id", required=False, allow_null=True)
    licenseCount = serializers.JSONField(source="license_count", required=False, allow_null=True)


class LicenseSummarySerializer(serializers.Serializer):
    """Serializer for LicenseSummaryDTO."""

    id = serializers.UUIDField()
    email = serializers.EmailField()
    isActivated = serializers.BooleanField(source="is_activated")
    createdAt = serializers.DateTimeField(source="created_at")


class AddedBySerializer(serializers.Serializer):
    """Serializer for AddedByDTO."""

    id = serializers.UUIDField()
    name = serializers.CharField()
    email = serializers.EmailField()


class LicenseSerializer(serializers.Serializer):
    """Serializer for LicenseDTO."""

    id = serializers.UUIDField()
    email = serializers.EmailField()
    isActivated = serializers.BooleanField(source="is_activated")
    activatedAt = serializers.DateTimeField(source="activated_at", allow_null=True)
    createdAt = serializers.DateTimeField(source="created_at")
    businessName = serializers.CharField(source="business_name", allow_blank=True)
    businessType = serializers.CharField(source="business_type", allow_blank=True)
    messageId = serializers.CharField(source="message_id", allow_null=True)
    emailStatus = serializers.CharField(source="email_status")
    addedBy = AddedBySerializer(source="added_by", allow_null=True)


class SeatStatisticsSerializer(serializers.Serializer):
    """Serializer for SeatStatisticsDTO."""

    purchased = serializers.IntegerField()
    assigned = serializers.IntegerField()
    activated = serializers.IntegerField()
    pending = serializers.IntegerField()
    available = serializers.IntegerField()
    total = serializers.IntegerField()


class LicenseStatsSerializer(SeatStatisticsSerializer):
    """Serializer for the stats response, including the legacy key names."""

    purchased_license_count = serializers.IntegerField(source="purchased")
    active_purchased_license_count = serializers.IntegerField(source="activated")
    available_licenses = serializers.IntegerField(source="available")


class LicenseListResponseSerializer(serializers.Serializer):
    """Serializer for LicenseListDTO."""

    licenses = LicenseSerializer(many=True)
    statistics = SeatStatisticsSerializer()
    hasTeam = serializers.BooleanField(source="has_team")


class AddLicenseResponseSerializer(serializers.Serializer):
    """Serializer for AddLicenseResultDTO."""

    message = serializers.CharField()
    emailSent = serializers.BooleanField(source="email_sent")
    license = LicenseSummarySerializer()


class BatchResultSerializer(serializers.Serializer):
    """Serializer for BatchResultDTO."""

    success = serializers.IntegerField()
    failed = serializers.IntegerField()
    emailsSent = serializers.IntegerField(source="emails_sent")
    emailsFailed = serializers.IntegerField(source="emails_failed")
    errors = serializers.ListField(child=serializers.CharField())
    licenses = LicenseSummarySerializer(many=True)


class AddLicensesResponseSerializer(serializers.Serializer):
    """Serializer for AddLicensesResultDTO."""

    message = serializers.CharField()
    results = BatchResultSerializer()


class ActivatedLicenseSerializer(serializers.Serializer):
    """Serializer for ActivatedLicenseDTO."""

    id = serializers.UUIDField()
    email = serializers.EmailField()
    businessName = serializers.CharField(source="business_name")
    businessType = serializers.CharField(source="business_type")
    isActivated = serializers.BooleanField(source="is_activated")
    activatedAt = serializers.DateTimeField(source="activated_at", allow_null=True)


class VerifyLicenseResponseSerializer(serializers.Serializer):
    """Serializer for VerifyLicenseDTO."""

    verified = serializers.BooleanField()
    isActivated = serializers.BooleanField(source="is_activated")


class EmailStatusSerializer(serializers.Serializer):
    """Serializer for EmailStatusDTO."""

    licenseId = serializers.UUIDField(source="license_id")
    email = serializers.EmailField()
    messageId = serializers.CharField(source="message_id")
    status = serializers.CharField()


class EmailStatusSyncResponseSerializer(serializers.Serializer):
    """Serializer for EmailStatusSyncDTO."""

    message = serializers.CharField()
    synced = serializers.IntegerField()
    statuses = EmailStatusSerializer(many=True)


class PurchaseResultSerializer(serializers.Serializer):
    """Serializer for PurchaseResultDTO."""

    scope = serializers.CharField(source="scope_kind")
    ownerId = serializers.UUIDField(source="owner_id")
    licensesAdded = serializers.IntegerField(source="licenses_added")
    totalLicenses = serializers.IntegerField(source="total_licenses")
