"""
HTML action buttons rendered into the ``operate`` column of admin tables
"""
from typing import Optional

from markupsafe import Markup


def edit_button(
        url: str,
        modal: bool = False,
        data_target: str = "#editModal",
        custom_class: Optional[str] = None,
        row_id: Optional[int] = None,
        icon_class: str = "fas fa-edit",
) -> Markup:
    """
    Edit button; with ``modal`` it opens ``data_target`` instead of
    following ``url``.
    """
    classes = "btn icon btn-xs btn-rounded btn-icon rounded-pill edit-data"
    if custom_class:
        classes = f"{classes} {custom_class}"

    if modal:
        return Markup(
            '<a href="{url}" class="{classes}" data-id="{row_id}" title="Edit" '
            'data-toggle="modal" data-bs-toggle="modal" data-bs-target="{target}">'
            '<i class="{icon}"></i></a>&nbsp;&nbsp;'
        ).format(
            url=url,
            classes=classes,
            row_id=row_id if row_id is not None else "",
            target=data_target,
            icon=icon_class,
        )

    return Markup(
        '<a href="{url}" class="{classes}" title="Edit"><i class="{icon}"></i></a>&nbsp;&nbsp;'
    ).format(url=url, classes=classes, icon=icon_class)


def delete_button(url: str, custom_class: Optional[str] = None) -> Markup:
    classes = "btn icon btn-xs btn-rounded btn-icon rounded-pill delete-form"
    if custom_class:
        classes = f"{classes} {custom_class}"
    return Markup(
        '<a href="{url}" class="{classes}" title="Delete"><i class="fa fa-trash"></i></a>&nbsp;&nbsp;'
    ).format(url=url, classes=classes)
