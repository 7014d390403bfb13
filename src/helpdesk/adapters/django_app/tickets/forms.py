"""
Django Forms para validação de entrada.

Forms são DRIVING ADAPTERS que validam dados antes de
passar para os Use Cases.

Responsabilidades:
- Validação estrutural (campos obrigatórios, tipos, catálogo)
- Sanitização de entrada
- Mensagens de erro amigáveis

Princípios:
- Forms NÃO contêm lógica de negócio
- Regras de fechamento, imutáveis etc. ficam na Entity
"""

from django import forms

from helpdesk.core.tickets.entities import IssueType, TicketStatus


ISSUE_TYPE_CHOICES = [(valor, valor) for valor in IssueType.valores()]
STATUS_CHOICES = [(status.value, status.value) for status in TicketStatus]


class TicketCreateForm(forms.Form):
    """
    Form para criação de ticket.

    Valida dados básicos antes de passar para CriarTicketService.
    O tipo de problema é restrito ao catálogo IssueType.
    """

    client_file_no = forms.CharField(
        label='Número do arquivo',
        max_length=100,
        error_messages={'required': 'Número do arquivo do cliente é obrigatório'},
    )

    mobile_no = forms.CharField(
        label='Celular',
        max_length=30,
        error_messages={'required': 'Celular é obrigatório'},
    )

    name_of_client = forms.CharField(
        label='Nome do cliente',
        max_length=200,
        error_messages={'required': 'Nome do cliente é obrigatório'},
    )

    issue_type = forms.ChoiceField(
        label='Tipo de problema',
        choices=ISSUE_TYPE_CHOICES,
        error_messages={
            'required': 'Tipo de problema é obrigatório',
            'invalid_choice': 'Tipo de problema inválido: %(value)s',
        },
    )

    description = forms.CharField(
        label='Descrição',
        max_length=5000,
        error_messages={'required': 'Descrição é obrigatória'},
    )

    resolution = forms.CharField(
        label='Resolução',
        max_length=5000,
        required=False,
    )

    assigned_to = forms.CharField(
        label='Responsável',
        max_length=100,
        required=False,
    )

    def clean_assigned_to(self):
        return self.cleaned_data.get('assigned_to') or None


class TicketUpdateForm(forms.Form):
    """
    Form para atualização parcial.

    Todos os campos são opcionais; a view repassa ao Use Case apenas
    os campos presentes no corpo da requisição.
    """

    client_file_no = forms.CharField(max_length=100, required=False)
    mobile_no = forms.CharField(max_length=30, required=False)
    name_of_client = forms.CharField(max_length=200, required=False)

    issue_type = forms.ChoiceField(
        choices=ISSUE_TYPE_CHOICES,
        required=False,
        error_messages={'invalid_choice': 'Tipo de problema inválido: %(value)s'},
    )

    description = forms.CharField(max_length=5000, required=False)
    resolution = forms.CharField(max_length=5000, required=False)

    status = forms.ChoiceField(
        choices=STATUS_CHOICES,
        required=False,
        error_messages={'invalid_choice': 'Status inválido: %(value)s'},
    )

    closed_on = forms.DateField(required=False, input_formats=['%Y-%m-%d'])
    closed_by = forms.CharField(max_length=254, required=False)
    assigned_to = forms.CharField(max_length=100, required=False)

    def campos_alterados(self, data: dict) -> dict:
        """
        Campos presentes em `data`, com valores limpos pelo form.

        Chaves desconhecidas seguem como vieram (a Entity as rejeita).
        """
        campos = dict(data)
        for nome in self.fields:
            if nome in data:
                campos[nome] = self.cleaned_data.get(nome)
        return campos


class TicketAtribuirForm(forms.Form):
    """
    Form para atribuição de ticket.

    Valida ID do usuário antes de passar para AtribuirTicketService.
    """

    usuario_id = forms.CharField(
        label='Usuário',
        max_length=100,
        error_messages={'required': 'Usuário é obrigatório'},
    )


class TicketFiltroForm(forms.Form):
    """
    Form para filtros de busca.

    Campos vazios significam "sem filtro".
    """

    q = forms.CharField(label='Busca', required=False, max_length=200)

    status = forms.ChoiceField(
        label='Status',
        required=False,
        choices=[('', 'Todos')] + STATUS_CHOICES,
    )
