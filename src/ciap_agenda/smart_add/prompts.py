from langchain_core.prompts import ChatPromptTemplate

smart_add_prompt = ChatPromptTemplate.from_template("""
O usuário quer adicionar um compromisso à agenda do Chefe do CIAP (PM/PA). Texto: "{text}".
Data de referência hoje é: {reference}.
Extraia: título, descrição, início, fim, tipo (meeting, lecture, event, task, ceremony), responsável (quem solicitou ou o Chefe), participantes (autoridades/equipes) e um emoji.
Resolva datas relativas ("amanhã", "sexta que vem") a partir da data de referência e devolva início e fim em ISO 8601 com fuso horário.
Se o fim não for informado, considere uma hora de duração.
Contexto: O Chefe realiza palestras, reuniões de comando e despachos administrativos.
""")
