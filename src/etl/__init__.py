"""Extract-transform-load services for GAA statistics workbooks."""
