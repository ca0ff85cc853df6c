"""Cursor, selection and undo handling for a layout-agnostic text field."""