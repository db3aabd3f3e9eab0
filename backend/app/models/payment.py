import uuid
from tortoise import fields, models

class Payment(models.Model):
    """
    Membership order created on the payment gateway.
    - order_id: gateway order id (e.g. order_XXXX)
    - payment_id: filled once the payment is captured (webhooks, out of scope here)
    - amount: in currency subunits (paise for INR)
    - notes: buyer name / email / plan type echoed back by the gateway
    """
    id = fields.UUIDField(pk=True, default=uuid.uuid4)
    user = fields.ForeignKeyField("models.User", related_name="payments", db_constraint=False)
    order_id = fields.CharField(max_length=64, unique=True)
    payment_id = fields.CharField(max_length=64, null=True)
    amount = fields.IntField()
    currency = fields.CharField(max_length=8)
    receipt = fields.CharField(max_length=64)
    status = fields.CharField(max_length=16)
    notes = fields.JSONField(default=dict)
    created_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        table = "payments"
