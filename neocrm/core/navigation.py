"""Sidebar navigation tree gated by minimum role."""

from dataclasses import dataclass, field
from typing import Any

from neocrm.core.permissions import RoleAuthority
from neocrm.core.tenant_requests import with_tenant_param
from neocrm.models.role import UserRole


@dataclass(frozen=True)
class NavItem:
    """
    One navigation entry.

    Attributes:
        name: Label shown in the sidebar
        href: Link target; None for a group that only holds children
        min_role: Lowest role allowed to see the entry; None means everyone
        children: Nested entries
    """

    name: str
    href: str | None = None
    min_role: UserRole | None = None
    children: tuple["NavItem", ...] = field(default_factory=tuple)


NAVIGATION: tuple[NavItem, ...] = (
    NavItem("Dashboard", "/"),
    NavItem("Chat", "/chat"),
    NavItem("Leads", "/leads"),
    NavItem("Agentes", "/agentes"),
    NavItem(
        "Integrações",
        children=(NavItem("WhatsApp", "/integracoes/whatsapp-v2"),),
    ),
    NavItem(
        "Conhecimento",
        children=(
            NavItem("Base", "/conhecimento/base"),
            NavItem("Documentos", "/conhecimento/documentos"),
        ),
    ),
    NavItem(
        "Follow Up",
        children=(
            NavItem(
                "Relatórios",
                children=(
                    NavItem("Geral", "/followup/relatorio/geral"),
                    NavItem("Por Dia", "/followup/relatorio/por-dia"),
                ),
            ),
            NavItem("Mensagens", "/followup/mensagens"),
            NavItem("Configurações", "/followup/configuracoes"),
        ),
    ),
    NavItem(
        "Relatórios",
        min_role=UserRole.MANAGER,
        children=(
            NavItem("Distribuição", "/relatorios/distribuicao", min_role=UserRole.MANAGER),
        ),
    ),
    NavItem(
        "Configurações",
        children=(
            NavItem("Perfil", "/configuracoes/perfil"),
            NavItem("Negócio", "/configuracoes/negocio"),
            NavItem("Notificações", "/configuracoes/notificacoes", min_role=UserRole.ADMIN),
            NavItem("Membros", "/members"),
        ),
    ),
)


def filter_navigation(
    items: tuple[NavItem, ...],
    authority: RoleAuthority,
    role: Any,
    tenant_id: str | None = None,
) -> list[dict]:
    """
    Keep the entries a role may see, with tenant-consistent links.

    Groups whose children are all filtered out are dropped as well.

    Returns:
        List of {"name", "href", "children"} dicts
    """
    visible = []
    for item in items:
        if item.min_role is not None and not authority.is_at_least(role, item.min_role):
            continue

        children = filter_navigation(item.children, authority, role, tenant_id)
        if item.children and not children:
            continue

        visible.append(
            {
                "name": item.name,
                "href": with_tenant_param(item.href, tenant_id) if item.href else None,
                "children": children,
            }
        )
    return visible
