from sqlalchemy import event


def _recompute_total(mapper, connection, target):
    target.calculate_total_amount()


def register_model_hooks():
    # Import inside to avoid circulars
    from .rent_record import RentRecord

    for name in ("before_insert", "before_update"):
        if not event.contains(RentRecord, name, _recompute_total):
            event.listen(RentRecord, name, _recompute_total)
