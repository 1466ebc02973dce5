from src.extensions import db
from src.logger import get_logger
from drafts.draft import Draft
from transactions.schemas import TransactionDraft
from user.exceptions import ValidationException

logger = get_logger("StockDash.Drafts")

PURCHASE_DRAFT_KEY = "purchaseTransactionDraft"
RESTOCK_DRAFT_KEY = "restockTransactionDraft"
SELECTED_MARKUPS_KEY = "selectedMarkups"

SNAPSHOT_KEYS = (PURCHASE_DRAFT_KEY, RESTOCK_DRAFT_KEY, SELECTED_MARKUPS_KEY)

DRAFT_KEYS = {
    "purchase": PURCHASE_DRAFT_KEY,
    "restock": RESTOCK_DRAFT_KEY,
}


class DraftStore:
    """Owner-scoped key/value snapshots; every value is a serialized list."""

    def __init__(self, owner_id):
        self.owner_id = owner_id

    @staticmethod
    def _check_key(key):
        if key not in SNAPSHOT_KEYS:
            raise ValidationException(f"Unknown snapshot key: {key}")

    def load(self, key, default=None):
        self._check_key(key)
        draft = db.session.get(Draft, (self.owner_id, key))
        return draft.value if draft else default

    def save(self, key, value, commit=True):
        self._check_key(key)
        if not isinstance(value, list):
            raise ValidationException(f"{key} must be a list")
        draft = db.session.get(Draft, (self.owner_id, key))
        if draft:
            draft.value = value
        else:
            db.session.add(Draft(owner_id=self.owner_id, key=key, value=value))
        if commit:
            db.session.commit()

    def clear(self, key, commit=True):
        self._check_key(key)
        draft = db.session.get(Draft, (self.owner_id, key))
        if draft:
            db.session.delete(draft)
            logger.info("Cleared %s for owner %s", key, self.owner_id)
        if commit:
            db.session.commit()


class PendingTransaction:
    """A purchase or restock in progress, persisted between visits."""

    def __init__(self, owner_id, kind, draft=None):
        if kind not in DRAFT_KEYS:
            raise ValidationException(f"No draft is kept for {kind} transactions")
        self.kind = kind
        self.key = DRAFT_KEYS[kind]
        self.store = DraftStore(owner_id)
        self.draft = draft or TransactionDraft(kind)

    @classmethod
    def load(cls, owner_id, kind):
        if kind not in DRAFT_KEYS:
            raise ValidationException(f"No draft is kept for {kind} transactions")
        snapshot = DraftStore(owner_id).load(DRAFT_KEYS[kind])
        return cls(owner_id, kind, TransactionDraft.from_snapshot(kind, snapshot))

    def save(self):
        # An empty draft is never written
        if self.draft.is_empty():
            self.store.clear(self.key)
        else:
            self.store.save(self.key, self.draft.to_snapshot())

    def clear(self, commit=True):
        self.draft = TransactionDraft(self.kind)
        self.store.clear(self.key, commit=commit)

    @property
    def items(self):
        return self.draft.items

    @property
    def total(self):
        return self.draft.total
