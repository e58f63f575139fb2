# spmanager/models/device_registration.py
from tortoise import fields, models


class DeviceRegistration(models.Model):
    """
    Records the device an account was registered from.
    - device_id: client-generated identifier kept in the browser's storage; unique, a device registers once
    - user: account created from this device (cascade delete)
    - created_at: registration time
    Rows are never deleted by the application.
    """
    id = fields.IntField(primary_key=True)
    device_id = fields.CharField(max_length=255, unique=True, index=True)
    user: fields.ForeignKeyRelation["User"] = fields.ForeignKeyField(
        "models.User", related_name="device_registration", on_delete=fields.CASCADE
    )
    created_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        table = "device_registrations"
