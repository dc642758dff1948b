# Log event codes emitted by the Registry
ENTRY_CREATED = 'ENTRY_CREATED'
SHORTCODE_GENERATED = 'SHORTCODE_GENERATED'
SHORTCODE_COLLISION = 'SHORTCODE_COLLISION'
REQUESTED_CODE_ACCEPTED = 'REQUESTED_CODE_ACCEPTED'
DUPLICATE_CODE = 'DUPLICATE_CODE'
INVALID_INPUT = 'INVALID_INPUT'
REDIRECT_SUCCESS = 'REDIRECT_SUCCESS'
SHORTCODE_NOT_FOUND = 'SHORTCODE_NOT_FOUND'
SHORTCODE_EXPIRED = 'SHORTCODE_EXPIRED'
ENTRIES_PURGED = 'ENTRIES_PURGED'
PERSISTENCE_FAILURE = 'PERSISTENCE_FAILURE'
