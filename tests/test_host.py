"""
Tests for the reference form host: event dispatching, builders and live forms.
"""

import pytest
from django import forms

from dynamic_forms import (
    AlreadySubmittedError,
    EventDispatcher,
    FormBuilder,
    FormEvent,
    FormEvents,
    FormLogicError,
    UnknownFieldError,
)


def test_dispatcher_orders_listeners_by_priority_then_registration():
    dispatcher = EventDispatcher()
    calls = []
    dispatcher.add_listener('event', lambda event: calls.append('default'))
    dispatcher.add_listener('event', lambda event: calls.append('late'), -1)
    dispatcher.add_listener('event', lambda event: calls.append('early'), 100)
    dispatcher.add_listener('event', lambda event: calls.append('default-2'))

    dispatcher.dispatch('event', FormEvent(None))

    assert calls == ['early', 'default', 'default-2', 'late']


def test_dispatcher_stops_propagation():
    dispatcher = EventDispatcher()
    calls = []

    def stopper(event):
        calls.append('stopper')
        event.stop_propagation()

    dispatcher.add_listener('event', stopper, 10)
    dispatcher.add_listener('event', lambda event: calls.append('never'))

    event = dispatcher.dispatch('event', FormEvent(None))

    assert calls == ['stopper']
    assert event.propagation_stopped is True


def test_dispatcher_registers_subscribers():
    class Subscriber:
        def __init__(self):
            self.calls = []

        def get_subscribed_events(self):
            return {
                FormEvents.PRE_SET_DATA: 'on_pre_set_data',
                FormEvents.POST_SUBMIT: ('on_post_submit', 5),
            }

        def on_pre_set_data(self, event):
            self.calls.append('pre_set_data')

        def on_post_submit(self, event):
            self.calls.append('post_submit')

    dispatcher = EventDispatcher()
    subscriber = Subscriber()
    dispatcher.add_subscriber(subscriber)

    assert dispatcher.has_listeners(FormEvents.PRE_SET_DATA)
    dispatcher.dispatch(FormEvents.POST_SUBMIT, FormEvent(None))
    assert subscriber.calls == ['post_submit']


def test_dispatcher_removes_listener():
    dispatcher = EventDispatcher()
    listener = lambda event: None  # noqa: E731
    dispatcher.add_listener('event', listener)
    dispatcher.remove_listener('event', listener)
    assert dispatcher.get_listeners('event') == []
    assert dispatcher.has_listeners('event') is False


def test_builder_children():
    builder = FormBuilder('person')
    builder.add('name', forms.CharField, {'max_length': 10})
    builder.add(FormBuilder('age', forms.IntegerField))

    assert builder.has('name')
    assert 'age' in builder
    assert len(builder) == 2
    assert [child.name for child in builder] == ['name', 'age']
    assert builder.get('name').get_option('max_length') == 10

    builder.remove('name')
    assert not builder.has('name')
    with pytest.raises(UnknownFieldError):
        builder.get('name')


def test_builder_separates_host_options_from_field_options():
    builder = FormBuilder('flag', forms.BooleanField, {'mapped': False, 'data': True, 'required': False})
    assert builder.get_mapped() is False
    assert builder.get_data() is True
    assert builder.get_options() == {'required': False}
    assert builder.create_field().required is False


def test_leaf_builder_refuses_children():
    with pytest.raises(FormLogicError):
        FormBuilder('name', forms.CharField).add('other', forms.CharField)


def test_get_form_maps_initial_data():
    builder = FormBuilder('person', options={'data': {'name': 'Ada', 'age': 36}})
    builder.add('name', forms.CharField)
    builder.add('age', forms.IntegerField)
    builder.add('newsletter', forms.BooleanField, {'mapped': False, 'data': True, 'required': False})

    form = builder.get_form()

    assert form.get('name').data == 'Ada'
    assert form.get('age').data == 36
    assert form.get('newsletter').data is True
    assert form.get('name').parent is form
    assert form.is_submitted() is False
    assert form.is_valid() is False


def test_pre_set_data_listener_can_replace_data():
    builder = FormBuilder('person', options={'data': {'name': 'ada'}})
    builder.add('name', forms.CharField)
    builder.get('name').add_event_listener(
        FormEvents.PRE_SET_DATA, lambda event: setattr(event, 'data', event.data.upper())
    )

    assert builder.get_form().get('name').data == 'ADA'


def test_set_data_inside_pre_set_data_is_a_cycle():
    builder = FormBuilder('person', options={'data': {}})
    builder.add_event_listener(FormEvents.PRE_SET_DATA, lambda event: event.form.set_data({}))

    with pytest.raises(FormLogicError):
        builder.get_form()


def test_child_added_while_setting_data_receives_its_data():
    builder = FormBuilder('person', options={'data': {'name': 'Ada', 'nickname': 'Countess'}})
    builder.add('name', forms.CharField)

    def add_nickname(event):
        event.form.parent.add('nickname', forms.CharField)

    builder.get('name').add_event_listener(FormEvents.PRE_SET_DATA, add_nickname)
    form = builder.get_form()

    assert form.get('nickname').data == 'Countess'


def test_child_added_after_initialization_receives_its_data():
    builder = FormBuilder('person', options={'data': {'name': 'Ada'}})
    form = builder.get_form()

    form.add('name', forms.CharField)

    assert form.get('name').data == 'Ada'


def test_listener_added_to_builder_after_get_form_still_fires():
    builder = FormBuilder('person', options={'data': {'name': 'Ada'}})
    builder.add('name', forms.CharField)
    form = builder.get_form()
    seen = []

    builder.get('name').add_event_listener(FormEvents.POST_SUBMIT, lambda event: seen.append(event.form.data))
    form.submit({'name': 'Grace'})

    assert seen == ['Grace']


def test_submit_converts_values_and_builds_data():
    builder = FormBuilder('person', options={'data': {'name': 'Ada', 'age': 36}})
    builder.add('name', forms.CharField)
    builder.add('age', forms.IntegerField)
    builder.add('newsletter', forms.BooleanField, {'mapped': False, 'required': False})

    form = builder.get_form().submit({'name': 'Grace', 'age': '85', 'newsletter': 'on'})

    assert form.is_submitted()
    assert form.is_valid()
    assert form.data == {'name': 'Grace', 'age': 85}
    assert form.get('newsletter').data is True


def test_child_removed_during_submission_writes_no_data():
    def hide_nickname(event):
        if event.form.data:
            event.form.parent.remove('nickname')

    builder = FormBuilder('person', options={'data': {}})
    builder.add('nickname', forms.CharField, {'required': False})
    builder.add('anonymous', forms.BooleanField, {'required': False})
    builder.get('anonymous').add_event_listener(FormEvents.POST_SUBMIT, hide_nickname)

    form = builder.get_form().submit({'nickname': 'Countess', 'anonymous': 'on'})

    assert not form.has('nickname')
    assert form.data == {'anonymous': True}


def test_replaced_child_is_detached():
    builder = FormBuilder('person')
    builder.add('name', forms.CharField)
    form = builder.get_form()
    old = form.get('name')

    form.add('name', forms.CharField, {'max_length': 3})

    assert old.parent is None
    assert form.get('name').parent is form


def test_unconvertible_value_is_a_transformation_failure():
    builder = FormBuilder('person', options={'data': {'age': 36}})
    builder.add('age', forms.IntegerField)

    form = builder.get_form().submit({'age': 'old'})
    age = form.get('age')

    assert age.transformation_failure is not None
    assert age.data is None
    assert len(age.errors) == 1
    assert age.errors[0].origin is age
    assert form.data == {'age': 36}
    assert form.is_valid() is False


def test_invalid_choice_is_a_transformation_failure():
    builder = FormBuilder('address')
    builder.add('state', forms.ChoiceField, {'choices': [('MI', 'Michigan')]})

    form = builder.get_form().submit({'state': 'CA'})

    assert form.get('state').transformation_failure is not None


def test_missing_required_value_is_not_a_transformation_failure():
    builder = FormBuilder('person')
    builder.add('name', forms.CharField)

    form = builder.get_form().submit({})
    name = form.get('name')

    assert name.transformation_failure is None
    assert len(name.errors) == 1
    assert form.is_valid() is False


def test_disabled_field_keeps_its_data():
    builder = FormBuilder('person', options={'data': {'name': 'Ada'}})
    builder.add('name', forms.CharField, {'disabled': True})

    form = builder.get_form().submit({'name': 'Grace'})

    assert form.get('name').data == 'Ada'
    assert form.is_valid()


def test_non_mapping_submission_of_compound_form_fails():
    builder = FormBuilder('person')
    builder.add('name', forms.CharField, {'required': False})

    form = builder.get_form().submit('not a mapping')

    assert form.transformation_failure is not None
    assert form.is_valid() is False


def test_form_can_only_be_submitted_once():
    builder = FormBuilder('person')
    builder.add('name', forms.CharField, {'required': False})
    form = builder.get_form().submit({})

    with pytest.raises(AlreadySubmittedError):
        form.submit({})
    with pytest.raises(AlreadySubmittedError):
        form.add('other', forms.CharField)


def test_clear_errors_keeps_transformation_failure():
    builder = FormBuilder('person')
    builder.add('age', forms.IntegerField)
    form = builder.get_form().submit({'age': 'old'})

    form.get('age').clear_errors()

    assert form.get('age').errors == []
    assert form.get('age').transformation_failure is not None
    assert form.is_valid() is True


def test_clear_errors_deep():
    builder = FormBuilder('person')
    builder.add('age', forms.IntegerField)
    builder.add('name', forms.CharField)
    form = builder.get_form().submit({'age': 'old'})
    assert len(form.get_errors(deep=True)) == 2

    form.clear_errors(deep=True)

    assert form.get_errors(deep=True) == []


def test_unknown_child_of_form():
    form = FormBuilder('person').get_form()
    with pytest.raises(UnknownFieldError):
        form.get('missing')
    with pytest.raises(KeyError):
        form['missing']


def test_removing_unknown_child_is_a_no_op():
    form = FormBuilder('person').get_form()
    assert form.remove('missing') is form


def test_only_root_forms_are_initialized():
    builder = FormBuilder('person')
    builder.add('name', forms.CharField)
    form = builder.get_form()
    with pytest.raises(FormLogicError):
        form.get('name').initialize()
