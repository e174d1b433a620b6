"""
In-process stand-in for the clinic REST backend.

The backend is served through ``httpx.MockTransport`` so the real
``ApiClient`` code path (headers, status mapping, JSON parsing) is exercised
without a server. Records are kept as wire dictionaries with Spanish keys.
"""

import itertools
import json
from datetime import date
from typing import Any, Callable, Dict, List, Optional, Tuple

import httpx

BASE_URL = "http://clinic.test/api"


class FakeBackend:
    """Minimal clinic backend with the business rules the desk relies on."""

    COLLECTIONS = (
        "citas",
        "clientes",
        "mascotas",
        "consultas",
        "facturas",
        "usuarios",
        "tratamientos",
    )

    def __init__(self, today: date = date(2025, 1, 15)):
        self.today = today
        self.data: Dict[str, Dict[int, Dict[str, Any]]] = {
            name: {} for name in self.COLLECTIONS
        }
        self.credentials: Dict[str, Tuple[str, Dict[str, Any]]] = {}
        self.requests: List[httpx.Request] = []
        self.forced: List[Tuple[int, Any]] = []
        self.overrides: Dict[str, Tuple[int, Any]] = {}
        self._ids = itertools.count(1000)

    # Seeding helpers

    def add(self, collection: str, record: Dict[str, Any]) -> Dict[str, Any]:
        if "id" not in record:
            record["id"] = next(self._ids)
        self.data[collection][record["id"]] = record
        return record

    def add_client(self, client_id: int, nombre: str = "Ana", apellido: str = "Pérez", **extra):
        record = {
            "id": client_id,
            "nombre": nombre,
            "apellido": apellido,
            "telefono": "555-0101",
            "correo": None,
            "estado": "Activo",
            **extra,
        }
        return self.add("clientes", record)

    def add_pet(self, pet_id: int, owner_id: int, nombre: str = "Firulais", **extra):
        record = {
            "id": pet_id,
            "nombre": nombre,
            "especie": "Perro",
            "raza": "Mestizo",
            "edad": 3,
            "sexo": "M",
            "usuario": owner_id,
            "estado": "Activo",
            **extra,
        }
        return self.add("mascotas", record)

    def add_user(self, user_id: int, rol: str, nombre: str = "Laura", **extra):
        record = {
            "id": user_id,
            "nombre": nombre,
            "apellido": "Gómez",
            "correo": f"user{user_id}@clinica.test",
            "rol_nombre": rol,
            "estado": "Activo",
            **extra,
        }
        return self.add("usuarios", record)

    def add_appointment(
        self,
        appointment_id: int,
        fecha: str,
        hora: str,
        mascota_id: int = 1,
        veterinario_id: int = 10,
        estado: str = "Agendada",
    ):
        return self.add(
            "citas",
            {
                "id": appointment_id,
                "mascota_id": mascota_id,
                "veterinario_id": veterinario_id,
                "fecha": fecha,
                "hora": hora,
                "motivo": "Control",
                "estado": estado,
            },
        )

    def add_consultation(
        self, consultation_id: int, mascota_id: int, costo: Any, estado: str = "Completada"
    ):
        return self.add(
            "consultas",
            {
                "id": consultation_id,
                "mascota_id": mascota_id,
                "veterinario_id": 10,
                "fecha_consulta": "2025-01-10",
                "motivo": "Vacunación",
                "diagnostico": "Sano",
                "tratamiento": "Vacuna antirrábica",
                "costo": costo,
                "estado": estado,
            },
        )

    def add_treatment(self, treatment_id: int, mascota_id: int, nombre: str, **extra):
        record = {
            "id": treatment_id,
            "mascota_id": mascota_id,
            "veterinario_id": 10,
            "nombre": nombre,
            "descripcion": "Tratamiento de prueba",
            "tipo": "Medicamento",
            "fecha_inicio": "2025-01-10",
            "fecha_fin": None,
            "costo": 50,
            "estado": "Activo",
            **extra,
        }
        return self.add("tratamientos", record)

    def add_login(self, email: str, password: str, user: Dict[str, Any]) -> None:
        self.credentials[email] = (password, user)

    def fail_next(self, status_code: int, body: Any = None) -> None:
        """Answer the next request with ``status_code`` regardless of the route."""
        self.forced.append((status_code, body))

    def respond(self, path_fragment: str, status_code: int, body: Any) -> None:
        """Answer every request whose path contains ``path_fragment`` with ``body``."""
        self.overrides[path_fragment] = (status_code, body)

    def requests_to(self, method: str, path_fragment: str) -> List[httpx.Request]:
        return [
            r for r in self.requests if r.method == method and path_fragment in r.url.path
        ]

    # Transport

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.forced:
            status_code, body = self.forced.pop(0)
            if body is None:
                return httpx.Response(status_code)
            return httpx.Response(status_code, json=body)
        for fragment, (status_code, payload) in self.overrides.items():
            if fragment in request.url.path:
                return httpx.Response(status_code, json=payload)

        body = json.loads(request.content) if request.content else None
        parts = [p for p in request.url.path.split("/") if p][1:]  # drop "api"
        if parts[:2] == ["mascotas", "mascotas"]:
            parts = parts[1:]
        if parts == ["auth", "login"]:
            return self._login(body)
        if parts == ["auth", "register"]:
            return self._register(body)

        collection, rest = parts[0], parts[1:]
        if collection not in self.data:
            return httpx.Response(404, json={"detail": "No encontrado"})

        route = self._route(collection, request.method, rest)
        if route is None:
            return httpx.Response(405, json={"detail": "Método no permitido"})
        return route(collection, rest, body, request)

    def _route(self, collection: str, method: str, rest: List[str]) -> Optional[Callable]:
        if not rest:
            return {"GET": self._list, "POST": self._create}.get(method)
        if rest[0].isdigit():
            if len(rest) == 1:
                return {
                    "GET": self._get,
                    "PUT": self._update,
                    "PATCH": self._update,
                    "DELETE": self._delete,
                }.get(method)
            return getattr(self, f"_{collection}_{rest[1].replace('-', '_')}", None)
        return getattr(self, f"_{collection}_{rest[0].replace('-', '_')}", None)

    # Generic handlers

    def _list(self, collection, rest, body, request):
        return httpx.Response(200, json=list(self.data[collection].values()))

    def _get(self, collection, rest, body, request):
        record = self.data[collection].get(int(rest[0]))
        if record is None:
            return httpx.Response(404, json={"detail": "No encontrado"})
        return httpx.Response(200, json=record)

    def _create(self, collection, rest, body, request):
        if collection == "citas":
            clash = [
                c
                for c in self.data["citas"].values()
                if c["fecha"] == body["fecha"]
                and c["hora"] == body["hora"]
                and c["estado"] != "Cancelada"
            ]
            if clash:
                return httpx.Response(
                    409, json={"detail": "Ya existe una cita en ese horario"}
                )
        if collection == "facturas":
            if any(
                f["consulta_id"] == body["consulta_id"]
                for f in self.data["facturas"].values()
            ):
                return httpx.Response(
                    409, json={"detail": "La consulta ya fue facturada"}
                )
        record = self.add(collection, dict(body))
        return httpx.Response(201, json=record)

    def _update(self, collection, rest, body, request):
        record = self.data[collection].get(int(rest[0]))
        if record is None:
            return httpx.Response(404, json={"detail": "No encontrado"})
        record.update(body or {})
        return httpx.Response(200, json=record)

    def _delete(self, collection, rest, body, request):
        if self.data[collection].pop(int(rest[0]), None) is None:
            return httpx.Response(404, json={"detail": "No encontrado"})
        return httpx.Response(204)

    # Appointments

    def _citas_horarios_disponibles(self, collection, rest, body, request):
        fecha = request.url.params["fecha"]
        taken = {
            c["hora"]
            for c in self.data["citas"].values()
            if c["fecha"] == fecha and c["estado"] != "Cancelada"
        }
        slots = ["09:00", "10:00", "11:00", "14:00", "15:00", "16:00", "17:00"]
        return httpx.Response(
            200,
            json=[{"fecha": fecha, "hora": h, "disponible": h not in taken} for h in slots],
        )

    def _citas_validar_horario(self, collection, rest, body, request):
        fecha = request.url.params["fecha"]
        hora = request.url.params["hora"]
        taken = any(
            c["fecha"] == fecha and c["hora"] == hora and c["estado"] != "Cancelada"
            for c in self.data["citas"].values()
        )
        return httpx.Response(200, json={"disponible": not taken})

    # Clients

    def _clientes_validar_desactivacion(self, collection, rest, body, request):
        client_id = int(rest[0])
        active = [
            p for p in self.data["mascotas"].values()
            if p["usuario"] == client_id and p["estado"] == "Activo"
        ]
        if active:
            return httpx.Response(
                200,
                json={"puede_desactivar": False, "razon": "El cliente tiene mascotas activas"},
            )
        return httpx.Response(200, json={"puede_desactivar": True})

    def _clientes_validar_eliminacion(self, collection, rest, body, request):
        client_id = int(rest[0])
        owned = [p for p in self.data["mascotas"].values() if p["usuario"] == client_id]
        if owned:
            return httpx.Response(
                200,
                json={"puede_eliminar": False, "razon": "El cliente tiene mascotas"},
            )
        return httpx.Response(200, json={"puede_eliminar": True})

    # Pets

    def _set_pet_status(self, rest, estado):
        record = self.data["mascotas"].get(int(rest[0]))
        if record is None:
            return httpx.Response(404, json={"detail": "No encontrado"})
        record["estado"] = estado
        return httpx.Response(200, json=record)

    def _mascotas_activar(self, collection, rest, body, request):
        return self._set_pet_status(rest, "Activo")

    def _mascotas_desactivar(self, collection, rest, body, request):
        return self._set_pet_status(rest, "Inactivo")

    def _mascotas_especies(self, collection, rest, body, request):
        return httpx.Response(200, json=[{"nombre": "Perro"}, {"nombre": "Gato"}, "Ave"])

    def _mascotas_por_cliente(self, collection, rest, body, request):
        client_id = int(request.url.params["cliente_id"])
        return httpx.Response(
            200,
            json=[p for p in self.data["mascotas"].values() if p["usuario"] == client_id],
        )

    # Invoices

    def _facturas_registrar_pago(self, collection, rest, body, request):
        record = self.data["facturas"].get(int(rest[0]))
        if record["estado"] in ("Pagada", "Anulada"):
            return httpx.Response(409, json={"detail": "La factura no admite pagos"})
        record.update(
            {
                "estado": "Pagada",
                "metodo_pago": body["metodo_pago"],
                "fecha_pago": self.today.isoformat(),
            }
        )
        return httpx.Response(200, json=record)

    def _facturas_anular(self, collection, rest, body, request):
        record = self.data["facturas"].get(int(rest[0]))
        if record["estado"] in ("Pagada", "Anulada"):
            return httpx.Response(409, json={"detail": "La factura no se puede anular"})
        record["estado"] = "Anulada"
        if body and body.get("motivo"):
            record["observaciones"] = f"Anulada: {body['motivo']}"
        return httpx.Response(200, json=record)

    def _facturas_generar_pdf(self, collection, rest, body, request):
        return httpx.Response(
            200, json={"pdf_url": f"http://clinic.test/media/facturas/{rest[0]}.pdf"}
        )

    def _facturas_consultas_pendientes(self, collection, rest, body, request):
        invoiced = {f["consulta_id"] for f in self.data["facturas"].values()}
        return httpx.Response(
            200,
            json=[
                c
                for c in self.data["consultas"].values()
                if c["estado"] == "Completada" and c["id"] not in invoiced
            ],
        )

    # Auth

    def _login(self, body):
        entry = self.credentials.get(body.get("correo"))
        if entry is None or entry[0] != body.get("contrasena"):
            return httpx.Response(401, json={"detail": "Credenciales inválidas"})
        return httpx.Response(200, json={"access_token": "token-123", "usuario": entry[1]})

    def _register(self, body):
        if body["correo"] in self.credentials:
            return httpx.Response(409, json={"detail": "El correo ya está registrado"})
        user = {
            key: value
            for key, value in body.items()
            if key not in ("contrasena", "confirmar_contrasena")
        }
        user.setdefault("estado", "Activo")
        record = self.add("usuarios", user)
        self.credentials[body["correo"]] = (body["contrasena"], record)
        return httpx.Response(201, json=record)
