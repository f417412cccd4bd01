"""Example usage of topoview."""

import logging
from pathlib import Path

from topoview import (
    CanvasController,
    DiagramRenderer,
    RenderConfig,
    SvgSurface,
    bridge,
    bus,
    exclude_kind_pairs,
    link,
    node,
    topology,
)


class PrintingPanel:
    """Stands in for a details side panel."""

    def on_node_selected(self, node):
        print(f"Selected {node.name} ({node.kind}, {node.status})")

    def on_selection_cleared(self):
        print("Selection cleared")


def build_core():
    """A small 5G core: control plane on a service bus, user plane below."""
    with topology() as store:
        sbi = bus("Service Bus", at=(80, 260), length=640, color="#3498db")
        n3 = bus("N3 Backhaul", at=(760, 120), orientation="vertical", length=360, color="#9b59b6")

        nrf = node("NRF", at=(120, 140), color="#16a085")
        amf = node("AMF", at=(260, 140), color="#2980b9")
        smf = node("SMF", at=(400, 140), color="#8e44ad", status="starting")
        udm = node("UDM", at=(540, 140), color="#c0392b")
        udr = node("UDR", at=(540, 360), color="#d35400", status="stopped")
        mysql = node("MySQL", kind="DB", at=(400, 360), color="#7f8c8d")
        upf = node("UPF", at=(680, 360), color="#27ae60")
        gnb = node("gNB", at=(260, 420), color="#f39c12", status="error")
        ue = node("UE", at=(120, 520), color="#e67e22")

        for nf in (nrf, amf, smf, udm, udr):
            nf >> sbi

        amf >> gnb | "N2"
        smf >> upf | "N4"
        gnb >> ue | "Radio"
        udr >> mysql | "SQL"
        gnb >> n3 | "N3"
        upf >> n3 | "N3"
        bridge(sbi, n3, interface="Bridge")

        # Logical registration link, never drawn
        link(nrf, udm, interface="Nnrf", visual=False)

    return store


def main():
    """Render the sample core, then replay a few pointer gestures."""
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    store = build_core()
    renderer = DiagramRenderer(
        config=RenderConfig(bridge_default_label="BUS BRIDGE"),
        suppress_connection=exclude_kind_pairs(("NRF", "UDM")),
    )
    canvas = CanvasController(
        store,
        renderer=renderer,
        surface=SvgSurface(900, 640),
        sink=PrintingPanel(),
    )
    canvas.render()

    output = Path("output")
    output.mkdir(exist_ok=True)
    canvas.surface.save_svg(str(output / "core.svg"))

    # Select AMF, hover SMF, then drag the UPF to the right
    canvas.click((280, 160))
    canvas.pointer_move((420, 160))
    canvas.pointer_down((690, 370))
    canvas.pointer_move((720, 380))
    canvas.pointer_move((740, 390))
    canvas.pointer_up((740, 390))
    canvas.surface.save_svg(str(output / "core_after_drag.svg"))

    canvas.click((20, 20))


if __name__ == "__main__":
    main()
