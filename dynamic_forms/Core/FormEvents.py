from enum import Enum


class FormEvents(str, Enum):
    """
    Lifecycle events dispatched by a form.

    PRE_SET_DATA and POST_SUBMIT are the two phases in which dependent
    fields are resolved. PRE_SUBMIT is only used to reset per-submission
    state on the root form.
    """
    PRE_SET_DATA = "form.pre_set_data"
    PRE_SUBMIT = "form.pre_submit"
    POST_SUBMIT = "form.post_submit"


# Phases in which a dependent field may fire, in lifecycle order.
PHASES = (FormEvents.PRE_SET_DATA, FormEvents.POST_SUBMIT)
