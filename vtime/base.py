"""Property and component containers handed over by a calendar parser."""

from __future__ import annotations

from .helper.converter import to_list, to_vname


class Property:
    """
    One tokenized iCalendar property.

    For example::
      <DTSTART{'TZID': ['Europe/Berlin']}20240101T090000>

    @ivar name:
        The uppercased name of the property.
    @ivar value:
        The raw, still encoded, value string or None if the property had none.
    @ivar params:
        A dictionary of uppercased parameter names and associated lists of
        values (the list may be empty for empty parameters).
    @ivar line_number:
        An optional line number associated with the property, copied onto
        errors raised while decoding it.
    """

    def __init__(self, name, value=None, params=None, line_number=None):
        self.name = name.upper()
        self.value: str | None = value
        self.params = {}
        self.line_number = line_number
        for key, values in (params or {}).items():
            self.params[key.upper()] = to_list(values)

    def __getattr__(self, name):
        """
        Make params accessible via self.foo_param or self.foo_paramlist.

        Underscores, legal in python variable names, are converted to dashes,
        which are legal in IANA tokens.
        """
        try:
            if name.endswith("_param"):
                return self.params[to_vname(name, 6, True)][0]
            if name.endswith("_paramlist"):
                return self.params[to_vname(name, 10, True)]
            raise AttributeError(name)
        except (KeyError, IndexError) as e:
            raise AttributeError(name) from e

    def __eq__(self, other):
        if not isinstance(other, Property):
            return NotImplemented
        return (self.name == other.name) and (self.params == other.params) and (self.value == other.value)

    def __repr__(self):
        return f"<{self.name}{self.params}{self.value}>"


class Component:
    """
    A named group of properties and sub-components, like VTIMEZONE or VEVENT.

    Children keep the order they were added in; a VTIMEZONE relies on the
    order of its STANDARD and DAYLIGHT blocks.
    """

    def __init__(self, name, properties=(), components=()):
        self.name = name.upper()
        self.properties: list[Property] = list(properties)
        self.components: list[Component] = list(components)

    def add(self, obj):
        """
        Append a Property or a Component, return it.
        """
        if isinstance(obj, Component):
            self.components.append(obj)
        else:
            self.properties.append(obj)
        return obj

    def get_properties(self, name):
        name = name.upper()
        return [prop for prop in self.properties if prop.name == name]

    def get_property(self, name):
        """
        Return the first property called name, or None.
        """
        return next(iter(self.get_properties(name)), None)

    def get_components(self, name):
        name = name.upper()
        return [comp for comp in self.components if comp.name == name]

    def __repr__(self):
        return f"<{self.name or '*unnamed*'}| {self.properties + self.components}>"
