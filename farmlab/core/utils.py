"""Request helpers and the audit trail"""
import logging

from .models import AuditLog

logger = logging.getLogger(__name__)

IP_HEADERS = ('HTTP_X_FORWARDED_FOR', 'HTTP_X_REAL_IP', 'REMOTE_ADDR')


def get_client_ip(request):
    """First address of the proxy chain, or the socket peer"""
    meta = getattr(request, 'META', None)
    if not meta:
        return None
    for header in IP_HEADERS:
        value = meta.get(header)
        if value:
            return value.split(',')[0].strip() or None
    return None


def field_changes(instance, data):
    """
    ``{field: {'old': ..., 'new': ...}}`` for every value in ``data`` that
    differs from the instance. Call before saving.
    """
    changes = {}
    for field, new in data.items():
        old = getattr(instance, field, None)
        if old != new:
            changes[field] = {'old': stringify(old), 'new': stringify(new)}
    return changes


def stringify(value):
    if value is None or isinstance(value, (bool, int, float, str, list, dict)):
        return value
    # Decimals, dates and related objects
    return str(value)


def create_audit_log(request=None, action=None, model_name=None, object_id=None,
                     changes=None, user=None, object_name=None):
    """
    Record who did what to which farm record.

    ``user`` overrides ``request.user``, e.g. for a freshly registered account.
    Never raises; a failed audit entry must not undo the operation it describes.
    """
    if not action or not model_name or object_id in (None, ''):
        logger.warning(f"Audit entry skipped: action={action}, model={model_name}, id={object_id}")
        return None

    actor = user or getattr(request, 'user', None)
    if actor is not None and not actor.is_authenticated:
        actor = None

    try:
        return AuditLog.objects.create(
            user=actor,
            action=action,
            model_name=model_name,
            object_id=str(object_id),
            object_name=object_name,
            changes=changes or {},
            ip_address=get_client_ip(request),
        )
    except Exception as e:
        logger.error(f"Failed to write audit entry for {model_name} {object_id}: {e}", exc_info=True)
        return None
